"""
services/ - Business Logic Layer
================================
Services sit between the console handlers and the repositories:
they format results, merge partial edits and build exports.
"""
