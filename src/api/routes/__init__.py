"""
API Routes - HTTP endpoint handlers

Each area (controls, presets, system) gets its own router, included in the main
app under /api/v1.
"""
