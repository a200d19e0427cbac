"""Content generation services"""
