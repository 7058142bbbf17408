from setuptools import setup, find_packages
import re

# Read version from w2calc/__init__.py
with open('w2calc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='w2calc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'w2calc': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyPDF2>=3.0.0',
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'w2-calc=w2calc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='W-2 field extraction from OCR text and federal bracket tax estimates.',
    python_requires='>=3.10',
)
