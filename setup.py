"""
Setup.py script for sqlitebridge
"""
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
import os

here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

PKG_EXCLUDES = ('extra_tests', 'extra_tests.*')

setup(
    name='sqlitebridge',
    version='0.1.0',
    description='Typed, memory-safe access to SQLite through its C interface',
    long_description=long_description,

    license='MIT',

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Database',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ],
    keywords='sqlite cffi database',

    packages=find_packages(exclude=PKG_EXCLUDES),
    python_requires='>=3.10',

    install_requires=['cffi>=1.15'],
    extras_require={
        'test': ['pytest>=7'],
    },
)
