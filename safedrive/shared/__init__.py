"""Shared helpers - domain errors, actors and input validators"""
