"""Shared package for the Floorplan Markers application.

This package contains code used by both the backend Flask API and the client
marker engine. It includes:

- Database models (models.py) - SQLAlchemy models for projects, floorplans, markers and equipment
- Enums (enums.py) - Marker types, equipment kinds and viewer modes
- Validation utilities (validation.py, schemas.py) - Input validation and sanitization

All shared components are designed to work identically in both backend and client contexts.
"""
