def init_routes(app):
    """Initialize all routes"""
    from .auth import auth_bp
    from .blog import blog_bp
    from .posts import posts_bp
    from .authors import authors_bp
    from .categories import categories_bp
    from .tags import tags_bp
    from .media import media_bp
    from .stats import stats_bp

    app.register_blueprint(blog_bp, url_prefix='/api')
    app.register_blueprint(auth_bp, url_prefix='/api/admin/auth')
    app.register_blueprint(posts_bp, url_prefix='/api/admin/posts')
    app.register_blueprint(authors_bp, url_prefix='/api/admin/authors')
    app.register_blueprint(categories_bp, url_prefix='/api/admin/categories')
    app.register_blueprint(tags_bp, url_prefix='/api/admin/tags')
    app.register_blueprint(media_bp, url_prefix='/api/admin/media')
    app.register_blueprint(stats_bp, url_prefix='/api/admin/stats')
