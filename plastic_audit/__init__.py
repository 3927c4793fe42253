"""Plastic waste audit service for the school sustainability platform."""
