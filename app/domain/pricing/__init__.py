"""Pricing domain - package and add-on catalog"""
