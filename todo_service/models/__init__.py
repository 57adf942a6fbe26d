"""Database models for Todo Service."""
