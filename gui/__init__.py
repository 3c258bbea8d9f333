"""
GUI - PyQt5 desktop dashboard
"""
