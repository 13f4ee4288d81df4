"""HR portal.

Web front end for the human-resources REST API, organized by layer
(api, listing, screens, web) around one generic list-management pattern.
"""
