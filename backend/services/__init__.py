"""
Services - fragmentation engine, flair, platform and group orchestration
"""
