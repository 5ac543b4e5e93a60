"""Flask 应用初始化"""
import logging

from flask import Flask
from flask_cors import CORS
from config import Config


def create_app(config_class=Config):
    """应用工厂函数"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL') or 'INFO'), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # 启用 CORS
    CORS(app)

    # 注册路由
    from chatcal.routes import api
    app.register_blueprint(api, url_prefix='/api')

    # 初始化内存中的对话集合
    from chatcal.store import store
    store.reset(seed_samples=bool(app.config.get('SEED_SAMPLE_DATA')), seed=app.config.get('SAMPLE_SEED'))

    watch_dir = app.config.get('IMPORT_WATCH_DIR')
    if watch_dir:
        from chatcal.watcher import ImportFolderWatcher
        watcher = ImportFolderWatcher(watch_dir, store)
        if watcher.start():
            app.extensions['import_watcher'] = watcher

    return app
