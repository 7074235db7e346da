"""
logo_importer package marker.
"""
