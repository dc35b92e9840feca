import os
from setuptools import setup

NAME = 'txgelf'


def getPackages(base):
    """
    Recursively find python packages.
    """
    packages = []

    for directory, _, files in os.walk(base):
        if '__init__.py' in files:
            packages.append(directory.replace(os.sep, '.'))

    return packages


setup(
    name=NAME,
    version='0.1.0',
    description='GELF over UDP client for Twisted',
    packages=getPackages(NAME),
    license="Apache 2.0",
    python_requires='>=3.7',
    install_requires=[
        'Twisted',
        'attrs',
        'pyrsistent',
        'toolz',
        'zope.interface',
    ],
    extras_require={
        'test': ['mock', 'testtools'],
    },
    entry_points={
        'console_scripts': ['txgelf-send = txgelf.script:run'],
    },
)
