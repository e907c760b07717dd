"""Persistence of plans and workout history."""
