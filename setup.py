from setuptools import find_packages, setup

setup(
    name='simple-backuper',
    version='1.0.0',
    description='Scheduled shell-script backups uploaded to object storage',
    packages=find_packages(exclude=[
        'backuper.test',
        'backuper.test.*',
    ]),
    install_requires=[
        'chardet',
        'croniter',
        'minio',
        'python-dateutil',
        'python-magic',
        'PyYAML',
        'urllib3',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
    entry_points={
        "console_scripts": [
            "backuper = backuper.main:main",
        ],
    }
)
