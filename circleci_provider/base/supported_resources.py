from typing import Literal


existing_resources = Literal[
    "circleci_environment_variable",
]
