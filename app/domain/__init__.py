"""Domain packages, one per area of the studio API"""
