from setuptools import setup, find_packages

setup(
    name             = 'bizzin-insights',
    version          = '1.0.0',
    description      = 'Bizzin Insights — recovery resilience, burnout and momentum scoring for journal entries',
    author           = 'Bizzin',
    packages         = find_packages(exclude=['tests*']),
    install_requires = open('requirements.txt').read().splitlines(),
    extras_require   = {
        'test': ['pytest>=7.4', 'httpx>=0.25'],
    },
    entry_points     = {
        'console_scripts': [
            'insights     = insights.cli:main',
        ],
    },
    python_requires  = '>=3.10',
    classifiers      = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
