"""
Cluster Subscription Service Django project.
"""
