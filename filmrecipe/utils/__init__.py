"""
Utility helpers for FilmRecipe
"""
