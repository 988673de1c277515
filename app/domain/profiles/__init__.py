"""Profiles domain - user profiles, roles and staff accounts"""
