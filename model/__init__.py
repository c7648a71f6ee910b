def load_all_models():
    import model.user                                    # noqa: F401
    import model.connection                              # noqa: F401
    import model.social.models                           # noqa: F401
    import model.notification                            # noqa: F401
