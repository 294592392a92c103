from setuptools import setup, find_packages
import os

# Read version
with open(os.path.join('sqompare', 'VERSION'), 'r') as f:
    version = f.read().strip()

setup(
    name='sqompare',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'sqlparse>=0.4.4',
        'sqlalchemy>=2.0.0',
        'pymysql>=1.0.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    entry_points={
        'console_scripts': [
            'sqompare=sqompare.main:main',
        ],
    },
    package_data={
        '': ['VERSION'],
    },
)
