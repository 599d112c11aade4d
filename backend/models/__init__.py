"""
Models package

- models.domain: storage-agnostic dataclasses used by services
- models.api: pydantic request/response models used by routers
"""
