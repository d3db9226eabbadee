"""
Package installation and setup script for linkleaf.
"""

from setuptools import setup, find_packages
import os

# Read the README file
readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
if os.path.exists(readme_path):
    with open(readme_path, 'r', encoding='utf-8') as f:
        long_description = f.read()
else:
    long_description = 'linkleaf - a personal link feed stored as protobuf'

# Read requirements
requirements_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
if os.path.exists(requirements_path):
    with open(requirements_path, 'r', encoding='utf-8') as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]
else:
    requirements = [
        'protobuf>=4.25.0',
        'python-dotenv>=1.0.0',
    ]

setup(
    name='linkleaf',
    version='1.0.0',
    description='A personal link feed manager backed by a protobuf binary file',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='linkleaf developers',

    # Package discovery
    packages=find_packages(exclude=['tests*']),
    include_package_data=True,

    # Dependencies
    install_requires=requirements,

    # Optional dependencies
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=23.0.0',
            'flake8>=5.0.0',
            'mypy>=1.0.0',
        ],
        'test': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
        ]
    },

    # Entry points
    entry_points={
        'console_scripts': [
            'linkleaf=linkleaf.main:main',
        ],
    },

    # Metadata
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: End Users/Desktop',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Utilities',
    ],

    # Python version requirement
    python_requires='>=3.10',

    # Keywords
    keywords='links bookmarks feed protobuf cli',

    # License
    license='MIT',

    # Zip safe
    zip_safe=False,
)
