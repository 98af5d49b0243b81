"""
REST API layer for Image Crop Flow
"""
