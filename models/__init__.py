"""
models/ - Domain Models
=======================
Plain dataclasses passed between repositories, services and the console.
They carry no database or presentation logic.
"""
