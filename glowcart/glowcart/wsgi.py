import os
import sys

# Добавляем корень приложения в PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "glowcart.settings")

from django.core.wsgi import get_wsgi_application

application = get_wsgi_application()
