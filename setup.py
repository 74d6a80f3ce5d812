from setuptools import find_packages, setup


setup(
    name = 'jetpack',
    version = '0.1.0',
    description = 'Command dispatch for App Container images and pods',
    license = 'MIT',
    packages = find_packages(exclude=['tests*']),
    install_requires = [
        'PyYAML',
        'startup',
    ],
    entry_points = {
        'console_scripts': [
            'jetpack = jetpack.cli:run',
        ],
    },
)
