"""Render Catln compiler dumps as browsable HTML."""
