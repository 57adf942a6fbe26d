"""Persistence stores for Todo Service."""
