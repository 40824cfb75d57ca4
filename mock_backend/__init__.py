"""In-memory stand-in for the Lindo backend REST API"""
