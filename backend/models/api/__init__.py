"""
Pydantic request/response models
"""
