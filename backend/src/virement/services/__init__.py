"""
Services package - PDF composition, export and the generation workflow.
"""
