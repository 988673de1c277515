"""Settings domain - runtime business settings"""
