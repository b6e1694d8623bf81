import configparser
from dataclasses import dataclass
import os
import re

from croniter import croniter
import yaml

from .domain import JobDefinition

RC_FILE_HELP = """\
Sample rcfile:
    [storage]
    endpoint = s3.example.com
    region = us-east-1
    bucket = backups
    access key = AKIA...
    secret key = ...
    auto create bucket = true|false # default false
    secure = true|false # default true
    [runner]
    keep workspace = true|false # default false
    prevent overlap = true|false # default false
    shell = sh # default sh

Environment variables override the rc-file: S3_ENDPOINT, S3_REGION, S3_BUCKET,
S3_ACCESS_KEY, S3_SECRET_KEY, S3_AUTO_CREATE_BUCKET, S3_SECURE and CONFIG_PATH
(the jobs file).

Sample jobs file:
    jobs:
      - name: db
        schedule: "0 3 * * *"
        script:
          - pg_dump mydb > ${TEMP_DIR}/db.sql
        filepath_to_upload: ${TEMP_DIR}/db.sql
"""

JOB_NAME_RE = re.compile(r"^[A-Za-z0-9_.#-]+$")


class ConfigError(Exception):
    pass


def _getConfig(cfgParser, section, option, defaultValue=None):
    if not cfgParser.has_section(section):
        return defaultValue
    if not cfgParser.has_option(section, option):
        return defaultValue
    return cfgParser.get(section, option)


def _parseBool(val, where):
    if val.lower() == 'true':
        return True
    elif val.lower() == 'false':
        return False
    else:
        raise ConfigError(
            "{where} has invalid setting {optionVal}.  Valid "
            "options: true, false".format(where=where, optionVal=val))


def _getBoolConfig(cfgParser, section, option, default):
    val = _getConfig(cfgParser, section, option, None)
    if val is None:
        return default
    return _parseBool(
        val, "RC file \"{section}.{option}\"".format(section=section, option=option))


@dataclass(frozen=True)
class StorageConfig:
    endpoint: str
    region: str
    bucket: str
    accessKey: str
    secretKey: str
    autoCreateBucket: bool = False
    secure: bool = True


class Config(object):
    # pylint: disable=too-many-instance-attributes
    validConfig = {
        'storage': {'endpoint', 'region', 'bucket', 'access key', 'secret key',
                    'auto create bucket', 'secure'},
        'runner': {'keep workspace', 'prevent overlap', 'shell'},
    }

    # option -> environment variable
    storageEnv = {
        'endpoint': 'S3_ENDPOINT',
        'region': 'S3_REGION',
        'bucket': 'S3_BUCKET',
        'access key': 'S3_ACCESS_KEY',
        'secret key': 'S3_SECRET_KEY',
        'auto create bucket': 'S3_AUTO_CREATE_BUCKET',
        'secure': 'S3_SECURE',
    }

    def _validateConfigParser(self, cfgParser):
        cfgSections = set(cfgParser.sections())
        unknownSections = cfgSections - set(self.validConfig.keys())
        if unknownSections:
            raise ConfigError(
                "RC file has unknown configuration sections: {}".format(
                    ", ".join(sorted(unknownSections))))
        for section in cfgSections:
            cfgValues = set(cfgParser.options(section))
            unknownOptions = cfgValues - self.validConfig[section]
            if unknownOptions:
                raise ConfigError(
                    "RC file has unknown configuration options in "
                    "section \"{}\": {}".format(
                        section, ", ".join(sorted(unknownOptions))))

    def __init__(self, options, environ=None):
        self.options = options
        self._environ = os.environ if environ is None else environ

        rcFile = os.path.expanduser(options.rcFile)
        cfgParser = configparser.RawConfigParser()
        cfgParser.read(rcFile)
        self._validateConfigParser(cfgParser)

        missing = []
        self._storage = self._storageConfig(cfgParser, missing)
        self._configPath = (getattr(options, 'configPath', None)
                            or self._environ.get('CONFIG_PATH'))
        if not self._configPath:
            missing.append('CONFIG_PATH')
        if missing:
            raise ConfigError(
                "missing required configuration: {}".format(", ".join(missing)))

        self._keepWorkspace = (
            getattr(options, 'keepWorkspace', False)
            or _getBoolConfig(cfgParser, 'runner', 'keep workspace', False))
        self._preventOverlap = _getBoolConfig(
            cfgParser, 'runner', 'prevent overlap', False)
        self._shell = _getConfig(cfgParser, 'runner', 'shell', 'sh')

    def _storageValue(self, cfgParser, option):
        envName = self.storageEnv[option]
        val = self._environ.get(envName)
        if val is not None:
            return val, envName
        where = "RC file \"storage.{}\"".format(option)
        return _getConfig(cfgParser, 'storage', option), where

    def _storageConfig(self, cfgParser, missing):
        values = {}
        for option in ('endpoint', 'region', 'bucket', 'access key', 'secret key'):
            val, _ = self._storageValue(cfgParser, option)
            if not val:
                missing.append(self.storageEnv[option])
            values[option] = val
        flags = {}
        for option, default in (('auto create bucket', False), ('secure', True)):
            val, where = self._storageValue(cfgParser, option)
            flags[option] = default if val is None else _parseBool(val, where)
        if missing:
            return None
        return StorageConfig(
            endpoint=values['endpoint'],
            region=values['region'],
            bucket=values['bucket'],
            accessKey=values['access key'],
            secretKey=values['secret key'],
            autoCreateBucket=flags['auto create bucket'],
            secure=flags['secure'])

    @property
    def verbose(self):
        return self.options.verbose

    @property
    def storage(self):
        return self._storage

    @property
    def configPath(self):
        return os.path.expanduser(self._configPath)

    @property
    def keepWorkspace(self):
        return self._keepWorkspace

    @property
    def preventOverlap(self):
        return self._preventOverlap

    @property
    def shell(self):
        return self._shell


def _requireStr(entry, key, where):
    val = entry.get(key)
    if not isinstance(val, str) or not val.strip():
        raise ConfigError("{}: \"{}\" must be a non-empty string".format(where, key))
    return val


def _parseJob(entry, index):
    where = "jobs[{}]".format(index)
    if not isinstance(entry, dict):
        raise ConfigError("{}: must be a mapping".format(where))
    name = _requireStr(entry, 'name', where)
    if not JOB_NAME_RE.match(name):
        raise ConfigError(
            "{}: name {!r} may only contain letters, digits and "
            "'_', '.', '#', '-'".format(where, name))
    where = "job {!r}".format(name)
    schedule = _requireStr(entry, 'schedule', where)
    if not croniter.is_valid(schedule):
        raise ConfigError("{}: invalid cron schedule {!r}".format(where, schedule))
    script = entry.get('script')
    if (not isinstance(script, list) or not script
            or not all(isinstance(line, str) for line in script)):
        raise ConfigError(
            "{}: \"script\" must be a non-empty list of strings".format(where))
    filepath = _requireStr(entry, 'filepath_to_upload', where)
    return JobDefinition(
        name=name,
        schedule=schedule,
        script=tuple(script),
        filepathToUpload=filepath)


def parseBackupRules(text):
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ConfigError("error parsing jobs file: {}".format(err)) from err
    if not isinstance(doc, dict) or not isinstance(doc.get('jobs'), list):
        raise ConfigError("jobs file must contain a \"jobs\" list")

    jobs = []
    seen = set()
    for index, entry in enumerate(doc['jobs']):
        job = _parseJob(entry, index)
        if job.name in seen:
            raise ConfigError("duplicate job name {!r}".format(job.name))
        seen.add(job.name)
        jobs.append(job)
    return jobs


def loadBackupRules(path):
    try:
        with open(path, encoding='utf-8') as fp:
            text = fp.read()
    except OSError as err:
        raise ConfigError("error reading jobs file {!r}: {}".format(path, err)) from err
    return parseBackupRules(text)
