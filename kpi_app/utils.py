from rest_framework import serializers

class LabelChoiceField(serializers.ChoiceField):
    """Accepts a choice key ("MANAGER") or its label ("Manager", any case)."""
    def to_internal_value(self, data):
        data_str = str(data)
        if data_str in self.choices:
            return data_str
        for key, label in self.choices.items():
            if str(label).lower() == data_str.lower() or str(key).lower() == data_str.lower():
                return key
        self.fail('invalid_choice', input=data)
