"""Shared building blocks: errors, clock, validators"""
