from flask_sqlalchemy import SQLAlchemy

# Расширения создаются без привязки к приложению, init_app() в create_app()
db = SQLAlchemy()
