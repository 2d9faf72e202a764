"""Oracle expression model, synthesis and validation"""
