import setuptools

setuptools.setup(
    name='diceroll',
    version='1.0.0',
    description='For parsing, rolling and averaging dice notation like 4d6h3.',
    packages=setuptools.find_packages(exclude=['tests']),
    package_data={'diceroll': ['macros.txt']},
    python_requires='>=3.8',
    install_requires=['rich'],
    entry_points={'console_scripts': ['roll=diceroll.cli:main']},
)
