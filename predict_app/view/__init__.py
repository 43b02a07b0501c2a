"""
View layer: pure state-to-view-model projection and HTML fragment rendering.
"""
