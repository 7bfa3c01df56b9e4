"""
Application Modules.

- backend/: Notes API, services, repositories, database, configuration
"""
