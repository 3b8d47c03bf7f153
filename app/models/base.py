# app/models/base.py
"""Shared declarative base for every model"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
