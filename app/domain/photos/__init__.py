"""Photos domain - uploads, galleries and client selections"""
