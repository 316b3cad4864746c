"""Module which initializes Dynaconf"""

from dynaconf import Dynaconf, Validator


# pylint: disable=too-few-public-methods
class DefaultValueValidator(Validator):
    """Validator which will run default function only when the original value is missing"""

    def __init__(self, name, default, **kwargs) -> None:
        super().__init__(
            name,
            ne=None,
            messages={
                "operations": (
                    "{name} must {operation} {op_value} but it is {value} in env {env}. "
                    "You might be missing tools on the cluster."
                )
            },
            default=default,
            when=Validator(name, must_exist=False) | Validator(name, eq=None),
            **kwargs
        )


settings = Dynaconf(
    environments=True,
    lowercase_read=True,
    load_dotenv=True,
    settings_files=["config/settings.yaml", "config/secrets.yaml"],
    envvar_prefix="CSRSUITE",
    merge_enabled=True,
    validators=[
        DefaultValueValidator("addons.ingress_controller.domain", default="ingress-nginx.http01.example.com"),
        DefaultValueValidator("cfssl", default="cfssl"),
        Validator("issuers", default=[], is_type_of=list),
    ],
    validate_only=["addons", "cfssl"],
    loaders=["dynaconf.loaders.env_loader", "csrsuite.config.openshift_loader", "csrsuite.config.feature_gates"],
)
