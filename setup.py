"""
Provides project-level commands. Commands are run via `python setup.py <command> [args]`

Commands available:

- apidoc: regenerate reST docs for the pydoc comments in src/tikconnector
- autobuild: watch the reST files and rebuild the documentation, refreshing the browser.
"""

from setuptools import setup, Command

import os


class RunInRootCommand(Command):
    user_options = []

    def initialize_options(self):
        self.cwd = None

    def finalize_options(self):
        self.cwd = os.getcwd()

    def run(self):
        assert os.getcwd() == self.cwd, 'Must be in package root: %s' % self.cwd
        self.runcmd()

    def runcmd(self):
        pass


class ApiDocCommand(RunInRootCommand):
    description = "regenerates the API docs"

    def runcmd(self):
        os.system('"sphinx-apidoc" -f -e -o docs/apidoc src/tikconnector')


class AutoBuildCommand(RunInRootCommand):
    description = "watches the docs for changes and rebuilds them, automatically refreshing the browser page"

    def runcmd(self):
        os.system("sphinx-autobuild docs docs/_build/html -B")


setup(
    name='tikconnector-py',
    version='0.1.0',
    description='Session and connector lifecycle for MikroTik RouterOS devices, with typed entity access.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['tikconnector', 'tikconnector.conduit', 'tikconnector.config', 'tikconnector.connector',
              'tikconnector.entity', 'tikconnector.protocol', 'tikconnector.support', 'tikconnector.test'],
    package_data={'tikconnector.config': ['*.schema.cfg']},
    python_requires='>=3.6',
    install_requires=[
        'configobj>=5.0.6,<5.1',
    ],
    extras_require={
        'test': ['PyHamcrest>=2.0', 'pytest'],
        'docs': ['sphinx', 'sphinx-autobuild'],
    },
    zip_safe=False,
    cmdclass={
        'apidoc': ApiDocCommand,
        'autobuild': AutoBuildCommand
    }
)
