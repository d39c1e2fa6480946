"""
convflow runtime: value system and layered memory.
"""
