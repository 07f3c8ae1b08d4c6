"""
Jobly: companies and jobs REST API.
"""
