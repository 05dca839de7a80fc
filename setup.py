#!/usr/bin/env python3

from setuptools import find_namespace_packages, setup

if __name__ == '__main__':
    setup(
        name='coopkit',
        version='0.1.0',
        description=(
            'Cooperative scheduler and thread synchronization primitives'
        ),
        author='Ilya Egorov',
        author_email='0x42005e1f@gmail.com',
        license='ISC',
        python_requires='>=3.8',
        package_dir={'': 'src'},
        packages=find_namespace_packages(where='src'),
        install_requires=[
            'exceptiongroup>=1.0.0; python_version<"3.11"',
            'typing-extensions>=4.6.0; python_version<"3.11"',
            'wrapt>=1.16.0',
        ],
        extras_require={
            'test': [
                'pytest>=7.0',
            ],
        },
    )
