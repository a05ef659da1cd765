from setuptools import setup, find_packages
from pathlib import Path

package_name = 'operator-util'
description = (
    'Helpers for Kubernetes operators built with kopf: watched namespaces '
    'and an append-only custom resource status.'
)
author = 'operator-util developers'
license = 'MIT'
pypi_classifiers = [
    'Development Status :: 4 - Beta',
    'License :: OSI Approved :: MIT License',
    'Programming Language :: Python :: 3.10'
]
keywords = ['kubernetes', 'kopf', 'operator']
readme = Path(__file__).parent / 'README.rst'

# Core dependencies
install_requires = [
    'kopf>=1.37',
    'kubernetes>=28.1.0',
    'pydantic>=2.5,<3',
    'structlog>=23.1',
]

# Test dependencies
tests_require = [
    'pytest>=7.4',
    'PyYAML>=6.0',
]
tests_require += install_requires

# Optional dependencies (like for dev)
extras_require = {
    'test': tests_require,
    # For development environments
    'dev': tests_require,
}

setup(
    name=package_name,
    version='0.1.0',
    description=description,
    long_description=readme.read_text(),
    author=author,
    license=license,
    classifiers=pypi_classifiers,
    keywords=keywords,
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    python_requires='>=3.10',
    install_requires=install_requires,
    tests_require=tests_require,
    extras_require=extras_require,
    include_package_data=True
)
