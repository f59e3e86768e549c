[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "digitalwallet"
version = "0.1.0"
description = "A digital wallet service and an account balance service, with clients, accounts, transfers and balance events"
requires-python = ">=3.10"
dependencies = []
keywords = ["wallet", "accounting", "balance", "transactions", "events", "unit-of-work", "wsgi", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
digitalwallet-wallet = "digitalwallet.wallet.app:main"
digitalwallet-balance = "digitalwallet.balance.app:main"

[tool.hatch.build.targets.wheel]
packages = ["digitalwallet"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
