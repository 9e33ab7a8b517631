"""Shared helpers used across routes and domains"""
