"""
Provides project-level commands. Commands are run via `python setup.py <command> [args]`

Commands available:

- apidoc: regenerate reST docs for inline pydoc comments
"""

from setuptools import setup, Command

import os


class ApiDocCommand(Command):
    description = "regenerates the API docs"
    user_options = []

    def initialize_options(self):
        self.cwd = None

    def finalize_options(self):
        self.cwd = os.getcwd()

    def run(self):
        assert os.getcwd() == self.cwd, 'Must be in package root: %s' % self.cwd
        os.system('"sphinx-apidoc" -f -e -o docs/apidoc src/scpibridge')


setup(
    name='scpibridge',
    version='0.1.0',
    description='A SCPI server core that bridges a line based text protocol to instrument drivers.',
    url='',
    author='',
    author_email='',
    license='BSD',
    package_dir={'': 'src'},
    packages=['scpibridge', 'scpibridge.conduit', 'scpibridge.config', 'scpibridge.protocol',
              'scpibridge.support'],
    package_data={'scpibridge': ['*.cfg'], 'scpibridge.config': ['*.cfg']},
    python_requires='>=3.6',
    install_requires=[
        'configobj>=5.0.9',
    ],
    extras_require={
        'test': ['PyHamcrest', 'timeout-decorator', 'pytest'],
    },
    zip_safe=False,
    cmdclass={
        'apidoc': ApiDocCommand,
    }
)
