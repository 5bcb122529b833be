# Schemas package init
"""
LocalBiz Directory — Pydantic API Schemas
===========================================

Request and response models. JSON keys are camelCase on the wire
(categoryId, ownerId, createdAt); Python attributes stay snake_case.
"""
