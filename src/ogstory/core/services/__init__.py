"""Servicios del Core (armonía de color y pipeline del story)."""
