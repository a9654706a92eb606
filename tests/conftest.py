import os

# Los tests usan los almacenes en memoria; se fija antes de importar la app
os.environ["USE_IN_MEMORY_DB"] = "true"
os.environ["APP_ENV"] = "development"
os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-bytes"
os.environ.pop("MONGO_URI", None)
