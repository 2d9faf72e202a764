"""Guard translation and the free-text translation driver"""
