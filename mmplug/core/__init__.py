"""Core logic for mmplug commands"""
