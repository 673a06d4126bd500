class KubeRecipesError(Exception):
    pass


class ConfigError(KubeRecipesError):
    pass


class MissingFileError(KubeRecipesError):
    pass


class ValidationError(KubeRecipesError):
    pass


class WatchError(KubeRecipesError):
    pass
