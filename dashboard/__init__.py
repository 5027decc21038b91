"""
Focusboard - веб-сервис дашборда (FastAPI)
"""
