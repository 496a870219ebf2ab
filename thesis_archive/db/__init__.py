"""Database bootstrap helpers"""
